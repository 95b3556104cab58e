"""Inbound broker event processing"""
