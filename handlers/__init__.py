"""
handlers/ - Presentation Layer
================================
Entry points that receive updates from Telegram and hand them to the
BotService. No command logic lives here.
"""
