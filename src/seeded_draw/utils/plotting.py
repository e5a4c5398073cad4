import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def plot_pairing_heatmap(
    frequencies: pd.DataFrame,
    title: str = "Pairing Probabilities",
    save_path: Optional[str] = None,
    annotate: bool = True
) -> plt.Figure:
    """
    Plot a second seeded x first seeded probability table as a heatmap.
    
    Args:
        frequencies: DataFrame indexed by second seeded teams, columns first seeded teams
        title: Plot title
        save_path: Optional path to save the plot
        annotate: Whether to print the probability in every cell
        
    Returns:
        Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(10, 8))
    
    values = frequencies.to_numpy(dtype=float)
    image = ax.imshow(values, cmap='viridis', vmin=0.0, vmax=max(values.max(), 1e-12))
    
    ax.set_xticks(np.arange(len(frequencies.columns)))
    ax.set_xticklabels(frequencies.columns, rotation=45, ha='right')
    ax.set_yticks(np.arange(len(frequencies.index)))
    ax.set_yticklabels(frequencies.index)
    ax.set_xlabel('First seeded')
    ax.set_ylabel('Second seeded')
    ax.set_title(title)
    
    if annotate:
        for i in range(values.shape[0]):
            for j in range(values.shape[1]):
                ax.text(j, i, f"{values[i, j]:.2f}", ha='center', va='center', color='white', fontsize=8)
    
    fig.colorbar(image, ax=ax, label='Probability')
    fig.tight_layout()
    
    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches='tight')
        logger.info(f"Pairing heatmap saved to {save_path}")
    
    return fig
