"""
Services module - API business logic, configuration and photo helpers.
"""
