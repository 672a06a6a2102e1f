"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Queue Item Validation Errors
    NEGATIVE_START_OFFSET = "Start offset cannot be negative"
    COLLECTION_TITLE_REQUIRED = "Playlist members must carry a collection title"
    COLLECTION_TITLE_FORBIDDEN = "Only playlist members may carry a collection title"

    # Duration Errors
    NEGATIVE_DURATION = "Duration cannot be negative"
    MALFORMED_DURATION = "Malformed duration text: {text!r}"
    INVALID_DURATION_TYPE = "Cannot interpret {value!r} as a duration"

    # State Errors
    INVALID_TRANSITION = "Cannot transition from {current} to {target}"

    # Voice Errors
    GUILD_NOT_AVAILABLE = "Guild {guild_id} is not available"
    CHANNEL_NOT_VOICE = "Channel {channel_id} is not a voice channel"
    VOICE_JOIN_TIMEOUT = "Timed out joining channel {channel_id}"
    VOICE_JOIN_FORBIDDEN = "Missing permission to join channel {channel_id}"
    VOICE_NOT_CONNECTED = "Voice connection is closed"

    # Metadata Errors
    NO_STREAM_URL_FOR_ITEM = "No stream URL found for {locator}"
    MEDIA_UNAVAILABLE = "Media '{locator}' is private, restricted, or removed"
    COLLECTION_NOT_FOUND = "Playlist '{collection_id}' was not found"
    EMPTY_API_RESPONSE = "Empty response from API"
    API_REQUEST_FAILED = "YouTube API request failed: {error}"

    # Configuration Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    YOUTUBE_API_KEY_REQUIRED = "metadata.youtube_api_key is required when backend is 'youtube_api'"
    INVALID_SETTINGS = "Invalid settings: {error}"
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Voice/Transport Operations
    VOICE_CONNECTED = "Connected to voice channel %s in guild %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_DISCONNECT_ERROR = "Error disconnecting voice in guild %s: %r"
    VOICE_JOIN_FAILED = "Could not join voice channel %s in guild %s: %s"
    STREAM_STARTED = "Streaming %s in guild %s from %sms"
    STREAM_START_FAILED = "Failed to start stream %s: %r"
    STREAM_ENDED = "Stream ended in guild %s (error: %s)"
    STREAM_IGNORING_STALE = "Ignoring stale stream callback in guild %s"
    STREAM_ERROR = "Stream error in guild %s: %s"
    STREAM_ERROR_RESTRICTED = "Restricted media in guild %s, skipping: %s"

    # Session State Machine
    SESSION_TRANSITION = "Guild %s: %s -> %s"
    SESSION_ITEM_STARTED = "Started playing '%s' in guild %s"
    SESSION_ITEM_FINISHED = "Item '%s' finished in guild %s (reason=%s)"
    SESSION_DRAINED = "Queue drained in guild %s, idle timeout armed for %ss"
    SESSION_IDLE_TIMEOUT = "Idle timeout fired in guild %s"
    SESSION_IDLE_TIMEOUT_STALE = "Ignoring stale idle timeout in guild %s"
    SESSION_STOPPED = "Stopped playback in guild %s (snapshot=%s items)"
    SESSION_PAUSED = "Paused playback in guild %s"
    SESSION_RESUMED = "Resumed playback in guild %s"
    SESSION_RESTORED = "Restored %s items from snapshot in guild %s"
    SESSION_JOIN_ABANDONED = "Queue emptied during join in guild %s, disconnecting"
    SESSION_CONNECTION_LOST = "Voice connection lost in guild %s, kept %s items for resume"
    SESSION_TEARDOWN = "Tore down session in guild %s"
    SESSION_SHUTDOWN = "Shutting down %s guild sessions"

    # Queue Operations
    QUEUE_APPENDED = "Appended '%s' (%s) in guild %s, queue length %s"
    QUEUE_CLEARED = "Cleared %s items from queue in guild %s"

    # Resolution/Search
    RESOLVE_STARTED = "Resolving %r in guild %s"
    RESOLVE_EMITTED = "Resolved %r into %s items in guild %s"
    RESOLVE_NO_RESULT = "No search result for %r"
    RESOLVE_LOOKUP_FAILED = "Metadata lookup failed for %r: %s"
    RESOLVE_NON_URI_MATCH = "Search match %r for %r is not a URI, treating as no result"

    # Metadata Backends
    CACHE_HIT = "Cache hit for '%s'"
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_FAILED_SEARCH = "Failed to search for %r"
    YTDLP_FAILED_EXTRACT_PLAYLIST = "Failed to extract playlist from %s"
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    YOUTUBE_API_REQUEST = "YouTube API %s %s"
    YOUTUBE_API_FAILED = "YouTube API %s failed: %r"
    YOUTUBE_API_PAGE = "Fetched playlist page %s for %s (%s items)"

    # Presence
    PRESENCE_UPDATE_FAILED = "Failed to update presence: %r"

    # Commands
    COMMAND_RECEIVED = "Command %s from user %s in guild %s"
    COMMAND_REJECTED = "Rejected %s in guild %s: %s"
    COMMAND_ERROR = "Command error in '%s': %s"
    COMMAND_ERROR_SEND_FAILED = "Failed to send error message to user"

    # Application Lifecycle
    BOT_STARTING = "Starting guild-jukebox in {environment} mode"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_CONFIG_ERROR = "Configuration error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Shutdown did not finish within %ss"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %s commands globally"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync commands globally: %s"
    BOT_SIGNAL_HANDLER_UNAVAILABLE = "Signal handlers unavailable on this platform"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in the channel a command came from.
    """

    # Guards
    STATE_NOT_IN_VOICE = "Not connected to voice channel"
    STATE_SERVER_ONLY = "This command can only be used in a server."
    USAGE_PLAY = "Usage: {prefix}play <url or search terms>"

    # Queue feedback
    QUEUE_ADDED = "Added to queue: {title}"
    QUEUE_ADDED_PLAYLIST = "Added to queue (playlist): {collection_title}"
    QUEUE_EMPTY = "Queue is empty"
    QUEUE_TOO_LONG_SUFFIX = "...\n**Queue too long to display!**"
    QUEUE_HEAD_LINE = "Currently playing: {title} || {elapsed} / {total} ||"
    QUEUE_ITEM_LINE = "{index}. || {starts_in} || {title}"
    QUEUE_GROUP_HEADING = "**{collection_title}**"
    QUEUE_GROUP_PREFIX = "> "

    # Resolution feedback
    RESOLVE_NO_RESULT = "No result found!"
    RESOLVE_LOOKUP_FAILED = "Could not fetch info for {locator}"
    RESOLVE_PLAYLISTS_DISABLED = "Playlists are not supported on this bot."

    # Transport feedback
    ERROR_COULD_NOT_JOIN_VOICE = "Could not join voice channel"

    # Control feedback
    ACTION_SKIPPING = "Skipping {title}"
    ACTION_STOPPED = "Stopped playback."
    ACTION_PAUSED = "Paused."
    ACTION_RESUMED = "Resumed."
    ACTION_RESTORED = "Resuming {count} items from where playback stopped."
    STATE_NOTHING_TO_SKIP = "There is nothing to skip!"
    STATE_NOTHING_TO_STOP = "There is nothing to stop!"
    STATE_NOTHING_TO_PAUSE = "There is nothing to pause!"
    STATE_NOTHING_TO_RESUME = "There is nothing to resume!"
    STATE_ALREADY_PAUSED = "Playback is already paused."
    STATE_NOT_PAUSED = "Playback is not paused."

    # Bot-level feedback
    ERROR_OCCURRED = "An error occurred: {error}"
    ERROR_MISSING_ARGUMENT = "Missing argument: {param_name}"
    PRESENCE_IDLE = "{prefix}play"
