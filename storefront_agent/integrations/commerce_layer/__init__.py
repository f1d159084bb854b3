# storefront_agent/integrations/commerce_layer/__init__.py
"""Commerce Layer integration package."""

from .auth import CommerceLayerAuth
from .stock import CommerceLayerStock

__all__ = ['CommerceLayerAuth', 'CommerceLayerStock']
