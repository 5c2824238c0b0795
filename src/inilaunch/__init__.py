"""inilaunch: start an application from an INI file behind a splash screen."""

__version__ = "0.1.0"
