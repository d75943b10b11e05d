"""
Server modules for the photo map application.

This package contains FastAPI router modules for the authentication, marker
and photo endpoints, the page routes and the shared error handling.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2025-12-17
"""
