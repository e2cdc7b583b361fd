"""
Example demonstrating area resolution and a simulated day of growth.
"""

from datetime import datetime, timedelta

import numpy as np
import matplotlib.pyplot as plt
from py_talispod.core import (
    Attribute, DEFAULT_CATALOG, EnvironmentReading, GrowthTimer, new_creature
)
from py_talispod.core.area_resolver import AreaResolver
from py_talispod.core.compatibility import expected_light_by_time
from py_talispod.core.environment import TEMP_STEPS, HUM_STEPS


ATTRIBUTE_CODES = {
    Attribute.NEUTRAL: 0,
    Attribute.VOLCANO: 1,
    Attribute.TORNADO: 2,
    Attribute.EARTHQUAKE: 3,
    Attribute.STORM: 4,
}


def main():
    resolver = AreaResolver()

    # Resolve every slider combination at midday light
    grid = resolver.resolve_grid(TEMP_STEPS, HUM_STEPS, 100)
    stats = resolver.area_statistics(grid)

    print("Area distribution over the slider grid:")
    for area_id, count in sorted(stats.items(), key=lambda item: -item[1]):
        name = DEFAULT_CATALOG.en_name(area_id) or "neutral"
        print(f"  {area_id:<11} {name:<22} {count} cells")

    codes = np.vectorize(lambda area_id: ATTRIBUTE_CODES[DEFAULT_CATALOG.attribute(area_id)])(grid)

    # Simulate one day in the plateau, following the sun
    creature = new_creature("DemoSaga", nickname="Kaze")
    timer = GrowthTimer(tick_seconds=60)
    start = datetime(2024, 6, 1, 0, 0)

    minutes = []
    max_hp = []
    wind = []
    for minute in range(24 * 60):
        now = start + timedelta(minutes=minute)
        reading = EnvironmentReading(temperature=-10, humidity=0, light=expected_light_by_time(now))
        timer.advance(creature, reading, 60, now)
        minutes.append(minute / 60)
        max_hp.append(creature.max_hp)
        wind.append(creature.grow_stats["wind"])

    print(f"\nAfter one day: max HP {creature.max_hp}, grown wind {creature.grow_stats['wind']}")

    fig, axes = plt.subplots(1, 2, figsize=(14, 6))

    ax = axes[0]
    colors = ['lightgray', 'orangered', 'mediumseagreen', 'saddlebrown', 'royalblue']
    cmap = plt.matplotlib.colors.ListedColormap(colors)
    image = ax.imshow(codes.astype(float), cmap=cmap, vmin=0, vmax=4, aspect='auto')
    ax.set_xticks(range(len(HUM_STEPS)))
    ax.set_xticklabels(HUM_STEPS, rotation=90)
    ax.set_yticks(range(len(TEMP_STEPS)))
    ax.set_yticklabels(TEMP_STEPS)
    ax.set_xlabel('Humidity (%)')
    ax.set_ylabel('Temperature (°C)')
    ax.set_title('Area attributes')
    cbar = plt.colorbar(image, ax=ax, ticks=range(5))
    cbar.ax.set_yticklabels(['Neutral', 'Volcano', 'Tornado', 'Earthquake', 'Storm'])

    ax = axes[1]
    ax.plot(minutes, max_hp, label='Max HP')
    ax.plot(minutes, wind, label='Grown wind')
    ax.set_xlabel('Hour')
    ax.set_title('One day on the plateau')
    ax.legend()

    plt.tight_layout()
    plt.savefig('growth_demo.png', dpi=150)
    print("\nVisualization saved to growth_demo.png")


if __name__ == "__main__":
    main()
