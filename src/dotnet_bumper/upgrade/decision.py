"""Deciding whether and how a located version token is rewritten."""

from __future__ import annotations

from dataclasses import dataclass, field

from dotnet_bumper.versioning import (
    ReleaseType,
    SupportPhase,
    TokenKind,
    UpgradeChannel,
    VersionToken,
    format_upgraded,
    is_at_least,
)


@dataclass(frozen=True, slots=True)
class Unchanged:
    reason: str = ""


@dataclass(frozen=True, slots=True)
class Replace:
    text: str


@dataclass(frozen=True, slots=True)
class Unsupported:
    reason: str


Decision = Unchanged | Replace | Unsupported


@dataclass(frozen=True)
class UpgradePolicy:
    """Rules gating upgrades that depend on more than version order.

    AWS Lambda only publishes managed runtimes for LTS releases once they
    reach active support. Portable runtime identifiers are only required
    from .NET 8.
    """

    gated_kinds: frozenset[TokenKind] = field(
        default_factory=lambda: frozenset({TokenKind.MANAGED_RUNTIME})
    )
    required_release_type: ReleaseType = ReleaseType.LTS
    minimum_support_phase: SupportPhase = SupportPhase.ACTIVE
    portable_rid_minimum: tuple[int, int] = (8, 0)

    def allows(self, channel: UpgradeChannel) -> bool:
        return (
            channel.release_type == self.required_release_type
            and channel.support_phase >= self.minimum_support_phase
        )

    def explain(self, channel: UpgradeChannel) -> str:
        return (
            f".NET {channel} is a {channel.release_type.value.upper()} release in the "
            f"{channel.support_phase.name.lower().replace('_', '-')} support phase; "
            f"AWS Lambda managed runtimes are only available for "
            f"{self.required_release_type.value.upper()} releases in the "
            f"{self.minimum_support_phase.name.lower()} support phase or later."
        )


def decide(token: VersionToken, channel: UpgradeChannel, policy: UpgradePolicy) -> Decision:
    """Decide what to do with *token* when upgrading to *channel*.

    Rules apply in order: tokens already at the channel are unchanged,
    policy-gated kinds are unsupported when the gate fails, and anything
    else is reformatted in its original style. A replacement identical to
    the original text is reported as unchanged.
    """
    if not token.upgradable:
        return Unchanged("not upgradable")

    if token.kind == TokenKind.RUNTIME_IDENTIFIER and channel.version < policy.portable_rid_minimum:
        return Unchanged(f"runtime identifiers are only normalized from .NET {policy.portable_rid_minimum[0]}")

    if is_at_least(token, channel):
        return Unchanged("already at or beyond the channel")

    if token.kind in policy.gated_kinds and not policy.allows(channel):
        return Unsupported(policy.explain(channel))

    text = format_upgraded(token, channel)
    if text == token.raw:
        return Unchanged("no textual change")
    return Replace(text)


class DecisionEngine:
    """Decides tokens for one channel and one set of files.

    The engine remembers whether an unsupported upgrade has already been
    reported, so the explanation is surfaced once per file set.
    """

    def __init__(self, channel: UpgradeChannel, policy: UpgradePolicy | None = None):
        self.channel = channel
        self.policy = policy or UpgradePolicy()
        self._warned = False

    def decide(self, token: VersionToken) -> Decision:
        return decide(token, self.channel, self.policy)

    def should_warn(self) -> bool:
        """Return True the first time it is called for the current file set."""
        if self._warned:
            return False
        self._warned = True
        return True

    def reset(self) -> None:
        self._warned = False
