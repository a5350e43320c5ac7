"""
Fostering business layer

FosterContext is the entry point; the rest are its collaborators.
"""

from foster_app.business.fostering.context import FosterContext
from foster_app.business.fostering.targets import RequestTarget

__all__ = ['FosterContext', 'RequestTarget']
