# Import all models here so SQLAlchemy can set up relationships
from comicscript.models.series import Series, CoverCategory
from comicscript.models.issue import Issue, CoverStyle
from comicscript.models.script import Page, Panel, Character, CAPTION, SFX

# This ensures all models are loaded before relationships are configured
__all__ = [
    'Series', 'CoverCategory',
    'Issue', 'CoverStyle',
    'Page', 'Panel', 'Character',
    'CAPTION', 'SFX',
]
