"""Centralized message constants for error messages, log lines, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Validation Errors
    UNSUPPORTED_URL = "only YouTube video URLs are supported"

    # Queue Validation Errors
    INVALID_QUEUE_POSITION = "Queue position must be 1 or greater"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Audio/Stream Errors
    NO_INFO_FOR_URL = "no video information returned"
    INVALID_INFO_FOR_URL = "video information could not be read"
    NO_STREAM_URL = "no playable audio stream found"
    TRANSCODER_FAILED = "audio transcoder could not start: {error}"

    # Voice Errors
    GUILD_NOT_FOUND = "guild not found"
    CHANNEL_NOT_VOICE = "channel {channel_id} is not a voice channel"
    VOICE_CONNECT_TIMEOUT = "timed out connecting to channel {channel_id}"
    VOICE_NO_PERMISSION = "missing permission to join channel {channel_id}"
    VOICE_CLIENT_ERROR = "voice client error: {error}"
    VOICE_NOT_CONNECTED = "not connected to voice"

    # Authentication/Security Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN is not set; add it to the environment or .env"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Cache Operations
    CACHE_HIT_URL = "Cache hit for URL: %s"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired cache entries"

    # Voice Operations
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_REUSED = "Reusing voice connection to channel %s in guild %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_DISCONNECT_FAILED = "Failed to disconnect from voice in guild %s: %s"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_SELF_DEAFEN_FAILED = "Failed to self-deafen in guild %s: %r"
    VOICE_STREAM_END = "Voice stream ended in guild %s (error: %s)"

    # Playback Operations
    PLAYBACK_CONNECTING = "Connecting playback for '%s' in guild %s (epoch %s)"
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_START_SUPPRESSED = "Start already in progress in guild %s (state=%s)"
    PLAYBACK_RESULT_DISCARDED = "Discarding stale playback start in guild %s (epoch %s)"
    PLAYBACK_TRACK_FAILED = "Dropping track '%s' in guild %s: %s"
    PLAYBACK_UNEXPECTED_ERROR = "Unexpected error starting playback in guild %s"
    PLAYBACK_TRANSPORT_ERROR = "Transport error while playing '%s' in guild %s: %s"
    PLAYBACK_IGNORING_STREAM_END = "Ignoring stale stream end in guild %s (epoch %s, current %s)"
    PLAYBACK_STOPPED = "Stopped playback in guild %s (%s tracks cleared)"
    PLAYBACK_SHUTDOWN_FAILED = "Failed to stop session for guild %s during shutdown"

    # Track Operations
    TRACK_FINISHED = "Track finished: '%s' in guild %s"
    TRACK_SKIPPED = "Skipped track: '%s' in guild %s"
    TRACK_REJECTED = "Rejected track %s in guild %s: %s"

    # Queue Operations
    QUEUE_EMPTY = "Queue empty in guild %s"
    QUEUE_ENQUEUED = "Enqueued track '%s' at position %s in guild %s"
    QUEUE_CLEARED = "Cleared %s tracks from queue in guild %s"

    # Session Registry
    SESSION_CREATED = "Created session for guild %s"
    SESSION_DISCARDED = "Discarded session for guild %s"
    SESSION_RETRY_STOPPED = "Session for guild %s stopped while waiting, retrying"

    # Progress Reporting
    PROGRESS_STARTED = "Progress reporting started for guild %s every %ss"
    PROGRESS_TICK_FAILED = "Progress update failed in guild %s"
    PROGRESS_MESSAGE_GONE = "Progress message vanished in guild %s, a new one will be posted"
    PROGRESS_FINAL_EDIT_FAILED = "Could not edit final progress message in guild %s: %s"

    # Occupancy Monitoring
    OCCUPANCY_TIMER_ARMED = "Disconnect timer armed in guild %s (reason=%s, %ss)"
    OCCUPANCY_TIMER_DISARMED = "Disconnect timer disarmed in guild %s (reason=%s)"
    OCCUPANCY_TIMER_FIRED = "Disconnect timer fired in guild %s: %d listener(s) present"
    OCCUPANCY_TIMER_FAILED = "Disconnect timer failed in guild %s"
    OCCUPANCY_NO_DISCONNECT_CALLBACK = "No disconnect callback set for guild %s"

    # Notifications
    NOTIFY_FAILED = "Failed to send notice: %s"

    # Resolution
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    YTDLP_INVALID_INFO = "Unusable info for %s (%d validation errors)"
    FFMPEG_SOURCE_CREATED = "Created FFmpeg source for %s"

    # Application Lifecycle
    BOT_STARTING = "Starting guild jukebox in %s mode"
    BOT_PLAYBACK_CONFIG = (
        "Playback: progress every %ss, disconnect grace %ss, queue display %s lines"
    )
    LOGGING_CONFIG_FALLBACK = "Could not load %s (%s), using basic console logging"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Bot exited with an unhandled error"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"


class DiscordUIMessages:
    """User-facing Discord messages.

    These strings are posted to the guild's text channel. Keep them concise
    and friendly.
    """

    # Enqueue
    ERROR_INVALID_URL = "❌ That is not a valid YouTube URL!"
    ERROR_METADATA_FAILED = "❌ Couldn't load that video: {reason}"
    ERROR_NOT_IN_VOICE = "Join a voice channel first!"
    ACTION_TRACK_QUEUED = "🎶 Added to queue: **{title}** ({duration}) | queue #{position}"

    # Playback
    ACTION_NOW_PLAYING = "▶️ Now playing: **{title}** ({duration})"
    ERROR_TRACK_FAILED = "⚠️ Couldn't play **{title}**: {reason}. Moving on to the next track."
    STATE_PLAYBACK_ENDED = "Playback ended: {title}"
    STATE_PROGRESS = "**Now Playing**: {title}\n{bar} {percent}% | {elapsed} / {total}"
    STATE_NOW_PLAYING = "🎵 **{title}** | {elapsed} / {total}\n{bar} {percent}%"
    STATE_NOTHING_PLAYING = "Nothing is playing right now!"

    # Queue
    STATE_QUEUE_EMPTY = "The queue is empty!"
    STATE_QUEUE_LINE = "{index}. {title} ({duration})"
    STATE_QUEUE_DRAINED = (
        "The queue is empty. I'll check the voice channel and leave in {seconds}s "
        "if nobody is there."
    )

    # Occupancy
    WARNING_CHANNEL_EMPTY = "Nobody is in the voice channel! Disconnecting in {seconds}s."
    ACTION_DISCONNECTED_EMPTY = "👋 Nobody was around, so I disconnected."
    ACTION_DISCONNECT_CANCELLED = "Someone came back, so I cancelled the disconnect!"
    STATE_STAYING_CONNECTED = "Listeners are still here, so I'll stay connected."
