"""Ядро приложения."""
