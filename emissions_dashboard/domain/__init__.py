"""Pure domain rules: data-point labels and approval ratings."""
