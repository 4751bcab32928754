"""
Chat app for real-time consulting between users and stylists.

This app handles:
- Conversations, one per (user, stylist) pair
- Message sending and history over REST and WebSocket
- Room broadcasts, system messages and notifications

Related apps:
    - authentication: User and Stylist stores, token resolution

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for WebSocket handlers.
    See routing.py for WebSocket URL patterns.

Usage:
    from chat.services import ChatService

    # Open (or reuse) a conversation
    result = ChatService.create_or_get_conversation(user_id=user.id, stylist_id=stylist.id)
    conversation, created = result.data

    # Send message
    result = ChatService.send_as_user(conversation.id, user.id, "Hello!")
"""
