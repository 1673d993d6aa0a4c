from .chooser import SecurityKeyChooser, is_fido_prompt_window
from .policy import Decision, decide

__all__ = ["Decision", "SecurityKeyChooser", "decide", "is_fido_prompt_window"]
