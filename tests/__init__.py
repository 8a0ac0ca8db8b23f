"""Tests for the Vehicle Command Scheduler integration."""
