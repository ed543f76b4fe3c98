import pymysql

# Django's mysql backend expects mysqlclient; PyMySQL stands in for it.
pymysql.install_as_MySQLdb()
if pymysql.version_info < (2, 2, 1):
    pymysql.version_info = (2, 2, 1, 'final', 0)
    pymysql.__version__ = '2.2.1'
