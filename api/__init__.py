"""HTTP API for the invoice creator"""
