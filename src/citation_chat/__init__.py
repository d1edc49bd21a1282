"""Citation Chat: multi-chat front-end for a citing question-answering service."""

__version__ = "0.1.0"
