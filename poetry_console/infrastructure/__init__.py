"""Document store adapters"""
