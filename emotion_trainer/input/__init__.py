"""Camera capture and face landmark inference"""
