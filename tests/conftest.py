"""
Shared pytest fixtures for testing the loader, cleaner, statistics and plots.
"""

import matplotlib
matplotlib.use("Agg")

import pytest
import pandas as pd
import matplotlib.pyplot as plt

from nyc_airbnb.data.loader import init_db


@pytest.fixture(autouse=True)
def close_figures():
    """Never leak figures between tests."""
    yield
    plt.close('all')


@pytest.fixture
def sample_listings():
    """
    Raw listings with exactly one problem per row where noted.

    Rows 3, 12: non-positive price
    Row 4: never available
    Row 5: minimum_nights > 365
    Row 6: missing last_review / reviews_per_month
    Row 11: price outlier (> 2 SD above the mean of the surviving rows)
    Row 10: minimum_nights == 365 (kept)
    """
    return pd.DataFrame({
        'id': ['1', '2', '3', '4', '5', '6', '7', '8', '9', '10', '11', '12'],
        'name': ['Sunny loft', 'Cozy room', 'Free room', 'Closed apt', 'Long stay', 'No reviews',
                 'Bronx couch', 'Midtown room', 'Brownstone', 'Queens bunk', 'Penthouse', 'Refund'],
        'host_id': ['101', '102', '103', '104', '105', '106', '107', '108', '109', '110', '111', '112'],
        'host_name': ['Ann', 'Bob', 'Cy', 'Di', 'Ed', 'Flo', 'Gus', 'Hal', 'Ivy', 'Jo', 'Kim', 'Lu'],
        'neighbourhood_group': ['Manhattan', 'Brooklyn', 'Brooklyn', 'Manhattan', 'Queens', 'Manhattan',
                                'Bronx', 'Manhattan', 'Brooklyn', 'Queens', 'Manhattan', 'Staten Island'],
        'neighbourhood': ['Harlem', 'Bushwick', 'Bushwick', 'Chelsea', 'Astoria', 'SoHo',
                          'Fordham', 'Midtown', 'Park Slope', 'Flushing', 'Tribeca', 'St. George'],
        'latitude': ['40.8116', '40.6944', '40.6950', '40.7465', '40.7644', '40.7233',
                     '40.8615', '40.7549', '40.6710', '40.7675', '40.7163', '40.6437'],
        'longitude': ['-73.9465', '-73.9213', '-73.9200', '-74.0014', '-73.9235', '-74.0030',
                      '-73.8900', '-73.9840', '-73.9814', '-73.8330', '-74.0086', '-74.0736'],
        'room_type': ['Entire home/apt', 'Private room', 'Private room', 'Entire home/apt', 'Private room',
                      'Entire home/apt', 'Shared room', 'Private room', 'Entire home/apt', 'Shared room',
                      'Entire home/apt', 'Private room'],
        'price': ['150', '80', '0', '120', '60', '200', '45', '95', '175', '55', '5000', '-10'],
        'minimum_nights': ['2', '1', '1', '3', '400', '2', '1', '2', '4', '365', '7', '1'],
        'number_of_reviews': ['10', '5', '0', '8', '2', '0', '12', '30', '22', '1', '3', '0'],
        'last_review': ['2019-05-21', '2019-06-01', '2019-01-05', '2018-12-30', '2019-03-03', '',
                        '2019-06-20', '2019-07-01', '2019-02-14', '2018-11-11', '2019-04-04', '2019-01-01'],
        'reviews_per_month': ['0.5', '0.3', '0.1', '0.2', '0.1', '',
                              '1.1', '2.0', '1.5', '0.05', '0.2', '0.1'],
        'calculated_host_listings_count': ['1', '2', '1', '1', '1', '1', '3', '1', '2', '1', '1', '1'],
        'availability_365': ['200', '100', '50', '0', '20', '300', '300', '150', '90', '10', '365', '40'],
    })


@pytest.fixture
def synthetic_listings():
    """
    Ten clean listings in two boroughs; no value breaches any filter.

    Manhattan prices: 100, 120, 110, 105, 115
    Brooklyn prices:  60, 70, 65, 62, 68
    """
    return pd.DataFrame({
        'id': [str(i) for i in range(1, 11)],
        'name': [f'Listing {i}' for i in range(1, 11)],
        'host_id': [str(200 + i) for i in range(1, 11)],
        'host_name': ['Ana', 'Ben', 'Cal', 'Dee', 'Eve', 'Fay', 'Gil', 'Hob', 'Ike', 'Jan'],
        'neighbourhood_group': ['Manhattan'] * 5 + ['Brooklyn'] * 5,
        'neighbourhood': ['Harlem', 'Chelsea', 'SoHo', 'Midtown', 'Tribeca',
                          'Bushwick', 'Park Slope', 'Williamsburg', 'Red Hook', 'Flatbush'],
        'latitude': ['40.8116', '40.7465', '40.7233', '40.7549', '40.7163',
                     '40.6944', '40.6710', '40.7081', '40.6734', '40.6501'],
        'longitude': ['-73.9465', '-74.0014', '-74.0030', '-73.9840', '-74.0086',
                      '-73.9213', '-73.9814', '-73.9571', '-74.0083', '-73.9496'],
        'room_type': ['Entire home/apt', 'Entire home/apt', 'Private room', 'Shared room', 'Entire home/apt',
                      'Private room', 'Entire home/apt', 'Private room', 'Shared room', 'Private room'],
        'price': ['100', '120', '110', '105', '115', '60', '70', '65', '62', '68'],
        'minimum_nights': ['1', '2', '3', '1', '30', '2', '1', '5', '1', '3'],
        'number_of_reviews': ['10', '25', '3', '0', '40', '12', '7', '30', '1', '18'],
        'last_review': ['2019-05-21', '2019-06-01', '2019-01-05', '2018-12-30', '2019-03-03',
                        '2019-06-20', '2019-07-01', '2019-02-14', '2018-11-11', '2019-04-04'],
        'reviews_per_month': ['0.5', '1.3', '0.1', '0.2', '2.1', '0.7', '0.4', '1.8', '0.05', '0.9'],
        'calculated_host_listings_count': ['1', '2', '1', '1', '3', '1', '1', '2', '1', '1'],
        'availability_365': ['200', '150', '365', '30', '90', '45', '300', '120', '10', '250'],
    })


def write_csv(df: pd.DataFrame, path):
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def listings_csv(tmp_path, sample_listings):
    """Sample listings written to a CSV file."""
    return write_csv(sample_listings, tmp_path / "listings.csv")


@pytest.fixture
def synthetic_csv(tmp_path, synthetic_listings):
    """Synthetic clean listings written to a CSV file."""
    return write_csv(synthetic_listings, tmp_path / "synthetic.csv")


@pytest.fixture
def test_db_with_data(listings_csv):
    """Database connection with the sample listings loaded as the raw table."""
    con = init_db(listings_csv)
    yield con
    con.close()


@pytest.fixture
def expected_test_data_stats():
    """Expected statistics for the sample listings."""
    return {
        'total_listings': 12,
        'missing_values': 1,
        'non_positive_prices': 2,
        'never_available': 1,
        'long_minimum_stays': 1,
        'price_outliers': 1,
        'clean_listings': 6,
        'room_types': {'Entire home/apt': 2, 'Private room': 2, 'Shared room': 2},
    }
