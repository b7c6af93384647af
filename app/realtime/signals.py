"""
Realtime signals.

Signals:
    presence_changed: Sent on every presence transition.
        Receivers get ``user_id`` (str) and ``online`` (bool). Sent exactly
        once per Offline->Online or Online->Offline edge, never for
        repeated connections of an already online user.
"""

from django.dispatch import Signal

presence_changed = Signal()
