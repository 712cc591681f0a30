"""
FU News Modules
===============

Flask blueprint modules for the public site and the admin area.
"""

__all__ = ['auth', 'news_public', 'news', 'categories', 'tags', 'accounts',
           'trash', 'dashboard', 'profile', 'ops']
