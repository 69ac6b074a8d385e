"""Fetchers, normalisers and pagers behind the PixelTube source facade."""
