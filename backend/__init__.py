"""
Attraction Expiry - Backend

Keeps attraction records' expiry state current.

Components:
- functions/: AWS Lambda function handlers
- lib/: Shared libraries and utilities
- scripts/: Operator scripts
"""

__version__ = "1.0.0"
__license__ = "MIT"
