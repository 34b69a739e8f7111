"""Signals sent when the remote entity store reports a change"""
from django.dispatch import Signal

# Sent with the keyword arguments entity_name, event ("create", "update" or "delete") and data
entity_changed = Signal()

ENTITY_EVENTS = ("create", "update", "delete")
