"""Conversation policy: exceptions, summarizers, context trimming, export."""
