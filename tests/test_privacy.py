"""
Tests for member id hashing and payload redaction.
"""

from mood_insights_mcp_server.privacy import (
    HASH_PREFIX,
    hash_member_id,
    redact_analysis,
    sanitize_analysis,
)

SALT = b"0123456789abcdef"


def _payload():
    return {
        "correlations": [
            {"memberA": "alice", "memberB": "bob", "emotionalSync": 0.9},
            {"memberA": "alice", "memberB": "carol", "emotionalSync": 0.2},
        ],
        "groupDynamics": {
            "overallHarmony": 0.5,
            "supportNetwork": ["alice", "bob"],
            "stressPoints": ["carol"],
        },
        "temporalPatterns": {"peakEmotionTimes": ["21:00"]},
    }


class TestHashMemberId:
    """Test member id hashing."""

    def test_format(self):
        hashed = hash_member_id("alice", SALT)
        assert hashed.startswith(HASH_PREFIX)
        assert len(hashed) == len(HASH_PREFIX) + 8

    def test_stable_for_same_salt(self):
        assert hash_member_id("alice", SALT) == hash_member_id("alice", SALT)

    def test_salt_changes_hash(self):
        assert hash_member_id("alice", SALT) != hash_member_id("alice", b"fedcba9876543210")

    def test_idempotent(self):
        hashed = hash_member_id("alice", SALT)
        assert hash_member_id(hashed, SALT) == hashed

    def test_empty(self):
        assert hash_member_id("", SALT) == ""


class TestRedactAnalysis:
    """Test payload redaction."""

    def test_all_member_ids_hashed_consistently(self):
        redacted = redact_analysis(_payload(), SALT)

        alice = hash_member_id("alice", SALT)
        assert redacted["correlations"][0]["memberA"] == alice
        assert redacted["correlations"][1]["memberA"] == alice
        assert alice in redacted["groupDynamics"]["supportNetwork"]
        assert redacted["groupDynamics"]["stressPoints"] == [hash_member_id("carol", SALT)]

    def test_metrics_untouched(self):
        redacted = redact_analysis(_payload(), SALT)

        assert redacted["correlations"][0]["emotionalSync"] == 0.9
        assert redacted["temporalPatterns"] == {"peakEmotionTimes": ["21:00"]}

    def test_input_not_modified(self):
        payload = _payload()
        redact_analysis(payload, SALT)
        assert payload == _payload()


class TestSanitizeAnalysis:
    """Test config-driven redaction."""

    def test_no_redaction(self, test_config):
        assert sanitize_analysis(_payload(), redact=False) == _payload()

    def test_redaction(self, test_config):
        redacted = sanitize_analysis(_payload(), redact=True)
        assert redacted["groupDynamics"]["stressPoints"][0].startswith(HASH_PREFIX)

    def test_hashing_disabled(self, test_config):
        test_config.privacy.hash_identifiers = False
        assert sanitize_analysis(_payload(), redact=True) == _payload()
