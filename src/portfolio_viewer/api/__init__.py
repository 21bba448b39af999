"""
Blueprints.

Provides:
- viewer_bp: access gate, deep links and the walkthrough screens
"""
from .viewer import viewer_bp

__all__ = ['viewer_bp']
