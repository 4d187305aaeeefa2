"""Clothing photo uploads and hosting."""
