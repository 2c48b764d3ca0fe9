"""Data loading module for users and question texts."""

from .loaders import load_users, load_questions, users_from_dataframe, save_users

__all__ = ["load_users", "load_questions", "users_from_dataframe", "save_users"]
