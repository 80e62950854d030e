from . import chat, formats, generate, pdf, quiz, resources, share

__all__ = ["chat", "formats", "generate", "pdf", "quiz", "resources", "share"]
