"""
Editor Jumper Test Suite

Resolution, argument building and launching are tested against a temporary
home directory and a recording launcher; no IDE is ever started.
"""
