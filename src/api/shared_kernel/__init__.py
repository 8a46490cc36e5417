"""Shared Kernel module.

This module contains foundational components that are explicitly shared across
the IAM and Shipping bounded contexts: the tenant context value object,
role/permission types with the access gate, and session token handling.
Changes here affect both contexts and should be carefully coordinated.
"""
