"""
Application constants shared by the server modules.
"""

PROJECT_NAME = "farmops"
API_V1_STR = "/api/v1"
VERSION = "1.0.0"
