"""
Interactive choropleth of incidents per district.

Thin adapter over the aggregation output: builds a GeoDataFrame of the
boundary polygons with their counts and colors, then draws it with folium.
Zero counts and unresolved districts are drawn in the "no data" color.
"""

from pathlib import Path
from typing import Optional, Union

import folium
import geopandas as gpd
from loguru import logger

from processing.boundaries import features_to_geodataframe

from .aggregation import ColorScale
from .session import IncidentSession


def build_map_frame(session: IncidentSession, year: Optional[str] = None) -> gpd.GeoDataFrame:
    """Boundary polygons with incident_count, count_label and color columns."""
    layer = session.map_layer(year)
    scale = session.color_scale
    return features_to_geodataframe(
        [d.feature for d in layer],
        columns={
            "incident_count": [d.count for d in layer],
            "count_label": [str(d.count) if d.has_data else "No data" for d in layer],
            "color": [scale.color(d.count, d.key) for d in layer],
        },
    )


def legend_html(scale: ColorScale, title: str) -> str:
    rows = "".join(
        f'<div><span style="display:inline-block;width:14px;height:14px;'
        f'background:{entry["color"]};margin-right:6px;border:1px solid #999;"></span>'
        f'{entry["label"]}</div>'
        for entry in scale.legend()
    )
    return f"""
    <div style="position: fixed; bottom: 30px; left: 30px; z-index: 9999;
                background-color: white; border: 2px solid #333333; border-radius: 5px;
                padding: 10px; font-family: Arial, sans-serif; font-size: 12px;">
      <b>{title}</b>{rows}
    </div>
    """


def build_incident_map(session: IncidentSession, year: Optional[str] = None) -> folium.Map:
    """Folium map with one styled polygon layer, tooltips, legend and title."""
    year = str(year or session.config.get("map.default_year", "all"))
    gdf = build_map_frame(session, year)
    if gdf.empty:
        raise ValueError("No boundary polygons to draw")

    bounds = gdf.total_bounds
    center = [(bounds[1] + bounds[3]) / 2, (bounds[0] + bounds[2]) / 2]
    logger.debug(f"     Map center: {center[0]:.4f}, {center[1]:.4f}")

    m = folium.Map(
        location=center,
        zoom_start=session.config.get("map.zoom_start", 7),
        tiles=session.config.get("map.tiles", "CartoDB Positron"),
        prefer_canvas=True,
    )

    folium.GeoJson(
        data=gdf.__geo_interface__,
        name=f"Incidents by district ({year})",
        style_function=lambda feature: {
            "fillColor": feature["properties"]["color"],
            "color": "#666666",
            "weight": 1,
            "fillOpacity": 0.75,
        },
        tooltip=folium.GeoJsonTooltip(
            fields=["display_name", "count_label"],
            aliases=["District:", "Incidents:"],
            localize=True,
            sticky=False,
            labels=True,
        ),
    ).add_to(m)

    folium.LayerControl(collapsed=False).add_to(m)

    scope = "all years" if year == "all" else year
    title_html = f"""
    <h3 align="center" style="font-size:20px; color: #333333; margin-top:10px;">
    <b>Mob Violence Incidents by District</b><br>
    <span style="font-size:14px;">{scope}</span>
    </h3>
    """
    m.get_root().html.add_child(folium.Element(title_html))
    m.get_root().html.add_child(folium.Element(legend_html(session.color_scale, "Incidents")))
    return m


def create_incident_choropleth(
    session: IncidentSession, output_path: Union[str, Path], year: Optional[str] = None
) -> bool:
    """
    Write the choropleth for one year-scope to HTML.

    Returns:
        Success status
    """
    logger.info("🗺️ Creating interactive choropleth map...")

    if not session.map_loaded:
        logger.warning(f"⚠️ Skipping map: {session.map_status or 'no boundary polygons loaded'}")
        return False

    try:
        m = build_incident_map(session, year)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        m.save(str(output_path))
        logger.success(f"  ✅ Interactive choropleth map saved: {output_path}")
        return True

    except Exception as e:
        logger.critical(f"❌ Error creating choropleth map: {e}")
        logger.trace("Detailed choropleth map error:")
        import traceback

        logger.trace(traceback.format_exc())
        return False
