"""Tests for subagent-skills."""
