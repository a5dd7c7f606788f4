"""
Application facades (LinkManager, AccountManager) and alias generation strategies.

Import the submodules directly.
"""
