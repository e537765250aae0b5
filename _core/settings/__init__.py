"""
Django settings package for Campus CMS Server.

Select a module with DJANGO_SETTINGS_MODULE (dev, production or test).
manage.py defaults to development settings.
"""
