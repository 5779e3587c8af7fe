import plotly.express as px
import pandas as pd

def export_set_activity(per_set, path: str):
    if not per_set:
        with open(path, "w") as f:
            f.write("<h1>Cache Set Activity</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(per_set)
    df = df.melt(
        id_vars=["set"],
        value_vars=["hits", "misses", "evictions"],
        var_name="outcome",
        value_name="count",
    )
    df['set'] = df['set'].astype(str)

    fig = px.bar(
        df,
        x="set",
        y="count",
        color="outcome",
        barmode="group",
        title="Cache Activity per Set",
        labels={"set": "Set Index", "count": "Count", "outcome": "Outcome"}
    )

    fig.update_layout(
        font=dict(family="Courier New, monospace", size=12),
        legend_title="Outcome"
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)

def export_set_activity_ascii(per_set):
    if not per_set:
        return "No data accesses recorded."

    max_count = max(max(row['hits'], row['misses']) for row in per_set)
    scale = 40.0 / max_count if max_count > 0 else 0 # Scale to 40 characters width

    chart = "Cache Set Activity (H = hit, M = miss)\n"
    chart += "" + ("-" * 90) + "\n"

    for row in per_set:
        hits_bar = 'H' * int(round(row['hits'] * scale))
        miss_bar = 'M' * int(round(row['misses'] * scale))
        chart += f"{row['set']:>8} |{hits_bar}{miss_bar}"
        chart += f"  hits={row['hits']} misses={row['misses']} evictions={row['evictions']}\n"

    chart += "" + ("-" * 90) + "\n"

    return chart
