"""Caller authentication (Bearer JWT)"""
