"""Invitation Module - per-buyer invitation state and listing lifecycle."""
from core.invitations.models import ActorContext, TargetResult, TransitionResult, LifecycleResult
from core.invitations.segmentation import classify, segment, in_bucket
from core.invitations.service import InvitationService

__all__ = [
    'InvitationService', 'ActorContext', 'TargetResult', 'TransitionResult', 'LifecycleResult',
    'classify', 'segment', 'in_bucket',
]
