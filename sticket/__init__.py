"""Sticket badge engine"""
