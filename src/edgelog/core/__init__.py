"""Core types shared by every journal component."""
