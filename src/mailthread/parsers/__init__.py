from .message_parser import load_messages, messages_from_json, parse_message, parse_messages
from .utils import split_addresses, split_references

__all__ = [
    "parse_message",
    "parse_messages",
    "load_messages",
    "messages_from_json",
    "split_addresses",
    "split_references",
]
