from rosmodels.plots._posterior import plot_posterior_draws

__all__ = ["plot_posterior_draws"]
