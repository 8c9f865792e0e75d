"""
Services - the operations behind the API.
"""

from postboard.services.resolvers import OperationResolvers, UNCHANGED_IMAGE

__all__ = [
    "OperationResolvers",
    "UNCHANGED_IMAGE",
]
