"""Configuration file discovery."""

from scan.files import find_terraform_files

__all__ = ["find_terraform_files"]
