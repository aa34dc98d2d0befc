"""Naver cafe notice board to Discord notifier."""
