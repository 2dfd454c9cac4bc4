"""
SDUI Core - Server-Driven UI state core

This package renders app screens from remote JSON configuration documents:
it validates the documents, seeds and reads them from the document store, and
decides which screen to show from the auth and onboarding status.

Modules:
    schemas: Pydantic models for screen documents and the app session
    forms: Field validation and button action interpretation
    repositories: Document store, config repository and local preferences
    auth: Identity provider contract and Supabase implementation
    state: The app state machine
    utils: Supabase client, logging helpers
"""

__version__ = "0.1.0"
__author__ = "SDUI Team"
