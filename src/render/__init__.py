"""Render module for FIRE planning output display."""

from render.renderers import (
    BaseRenderer,
    ProjectionRenderer,
    ScenariosRenderer,
    FireRenderer,
    GermanTaxRenderer,
    CountryTaxRenderer,
    LifestyleBasketRenderer,
    InvestmentsRenderer,
    RENDERER_REGISTRY,
)

__all__ = [
    'BaseRenderer',
    'ProjectionRenderer',
    'ScenariosRenderer',
    'FireRenderer',
    'GermanTaxRenderer',
    'CountryTaxRenderer',
    'LifestyleBasketRenderer',
    'InvestmentsRenderer',
    'RENDERER_REGISTRY',
]
