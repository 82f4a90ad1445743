"""Toast-style notifications carried through Flask's flash queue."""

from flask import flash

SUCCESS = 'success'
ERROR = 'error'  # rendered with the destructive style


def flash_toast(title: str, description: str = "", category: str = SUCCESS) -> None:
    flash({'title': title, 'description': description}, category)


def flash_backend_error(error) -> None:
    """Surface a backend error message as-is."""
    flash_toast('Something went wrong.', str(error), ERROR)
