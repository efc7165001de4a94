"""Secure edit links and structured webhook payloads for form submissions."""
