"""Plots of tours and convergence."""
