"""Host event handlers for capture and recall"""
