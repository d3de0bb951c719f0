"""Database table name constants and type references."""

# Table names used in Supabase queries
PROFILES = "profiles"
USER_NICKNAMES = "user_nicknames"
VOICE_MESSAGES = "voice_messages"
VOICE_MESSAGE_RECIPIENTS = "voice_message_recipients"
INVITE_CODES = "invite_codes"

# Message types
MESSAGE_DIRECT = "direct"
MESSAGE_BROADCAST = "broadcast"
VALID_MESSAGE_TYPES = {MESSAGE_DIRECT, MESSAGE_BROADCAST}

# Shown wherever a nickname can't be fetched or created
ANONYMOUS_NICKNAME = "익명의 사용자"
