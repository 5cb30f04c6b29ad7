"""
Services layer - Business logic goes here.

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Services raise domain errors; routes map them to HTTP status codes
"""
