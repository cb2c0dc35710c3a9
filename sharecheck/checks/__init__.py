from .content import check_content, EMPTY_FILE

__all__ = ["check_content", "EMPTY_FILE"]
