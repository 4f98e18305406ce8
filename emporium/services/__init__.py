"""
Services: the operations behind the resource routes.
"""
