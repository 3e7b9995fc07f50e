"""
CLI Package - interactive console menu for the projects tracker
"""
