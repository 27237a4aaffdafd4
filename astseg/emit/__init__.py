"""Emitters for IR trees and segments."""
